import json

from utils.constants import SSE


def parse_sse_frames(body):
    """
    Split an SSE body into its data payloads.
    JSON frames are decoded; the [DONE] sentinel is returned as a string.
    """
    frames = []
    for block in body.split("\n\n"):
        block = block.strip()
        if not block.startswith("data:"):
            continue
        data = block[len("data:"):].strip()
        frames.append(data if data == SSE.DONE_SENTINEL else json.loads(data))
    return frames


def streamed_content(frames):
    """Concatenate the content chunks of parsed SSE frames."""
    return "".join(f["content"] for f in frames if isinstance(f, dict) and "content" in f)


def assert_degraded_payload(payload):
    """Assert the total-failure response shape."""
    assert payload["model"] == "error", f"Unexpected model label: {payload['model']}"
    assert payload["tokens"] == 0
    assert payload["fallbackUsed"] is True
    assert payload["content"], "Degraded payload must still carry an apology"
