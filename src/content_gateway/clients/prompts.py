"""
System prompts for text analysis and content generation.

Unknown types fall back to the ``general`` prompt.
"""

ANALYSIS_PROMPTS = {
    "sentiment": "You are a sentiment analysis expert. Analyze the sentiment of the given text and provide a brief summary.",
    "summary": "You are a text summarization expert. Provide a concise summary of the given text.",
    "keywords": "You are a keyword extraction expert. Extract the main keywords and topics from the given text.",
    "language": "You are a language detection expert. Identify the language of the given text and provide confidence level.",
    "general": "You are a text analysis expert. Analyze the given text and provide insights.",
}

ANALYSIS_DESCRIPTIONS = {
    "sentiment": "Analyze the emotional tone of text",
    "summary": "Create a concise summary of text",
    "keywords": "Extract main keywords and topics",
    "language": "Detect the language of text",
    "general": "General text analysis",
}

CONTENT_PROMPTS = {
    "story": "You are a creative storyteller. Write engaging and imaginative stories.",
    "poem": "You are a poet. Create beautiful and meaningful poetry.",
    "essay": "You are an essay writer. Create well-structured and informative essays.",
    "code": "You are a software developer. Write clean, efficient, and well-documented code.",
    "general": "You are a creative writing assistant. Generate high-quality content.",
}

CONTENT_DESCRIPTIONS = {
    "story": "Generate creative stories",
    "poem": "Create poetry",
    "essay": "Write structured essays",
    "code": "Generate code snippets",
    "general": "General content generation",
}

DEFAULT_CREATIVITY = 0.9
CONTENT_MAX_TOKENS = 2000


def analysis_prompt(analysis_type: str) -> str:
    return ANALYSIS_PROMPTS.get(analysis_type.lower(), ANALYSIS_PROMPTS["general"])


def content_prompt(content_type: str) -> str:
    return CONTENT_PROMPTS.get(content_type.lower(), CONTENT_PROMPTS["general"])
