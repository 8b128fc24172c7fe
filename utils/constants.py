"""
Constants and system prompts for the AI chat assistant.
User-facing text is Arabic first, matching the chat UI.
"""

DEFAULT_SYSTEM_PROMPT = """أنت drx3، مساعد ذكي متخصص في الذكاء الاصطناعي والبرمجة والتكنولوجيا.

خصائصك:
- خبير في Python، JavaScript، الذكاء الاصطناعي، والتعلم الآلي
- تجيب باللغة العربية بشكل أساسي مع دعم الإنجليزية عند الحاجة
- تقدم إجابات منظمة ومفصلة ومفيدة
- تستخدم التنسيق المناسب (عناوين، قوائم، كود)
- تشرح المفاهيم بطريقة واضحة ومنطقية

إرشادات التنسيق:
- استخدم العناوين (# ## ###) لتنظيم المحتوى
- استخدم القوائم المرقمة والنقطية عند الحاجة
- ضع الكود في صناديق مع تحديد اللغة
- استخدم النص الغامق للنقاط المهمة
- نظم الإجابة بشكل هرمي وواضح"""


# One instruction line per enabled behavior flag, appended in this order
THINKING_INSTRUCTION = "- فكر خطوة بخطوة قبل الإجابة وأظهر عملية التفكير"
SEARCH_INSTRUCTION = "- ابحث في معرفتك بعمق للحصول على أفضل إجابة شاملة"
RAG_INSTRUCTION = "- استخدم قاعدة المعرفة المتاحة للحصول على معلومات دقيقة ومحدثة"


# Provider produced no text
EMPTY_PROVIDER_RESPONSE = "عذراً، لم أتمكن من إنتاج رد مناسب."

# Every provider failed
ALL_PROVIDERS_FAILED_MESSAGE = "عذراً، أواجه مشكلة تقنية مؤقتة في جميع الخدمات. يرجى المحاولة مرة أخرى."

# Provider answered 2xx with a body of the wrong shape
MALFORMED_RESPONSE_BODY = "Malformed response body"

# Request could not be processed at all (e.g. no provider configured)
REQUEST_FAILED_MESSAGE = "حدث خطأ في معالجة طلبك. يرجى المحاولة مرة أخرى."

ERROR_MODEL_LABEL = "error"
FALLBACK_LABEL_SUFFIX = " - Fallback"

# Characters per token for the usage estimate when a provider reports none
CHARS_PER_TOKEN = 4


class SSE:
    """Server-sent events framing for the streaming endpoint."""
    DONE_SENTINEL = "[DONE]"
    MEDIA_TYPE = "text/event-stream"
