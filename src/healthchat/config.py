"""Configuration constants.

Centralizes limits and default values used across modules.
"""

# History configuration
HISTORY_MAX_ENTRIES = 50  # Conversations kept in the history log
PREVIEW_MAX_LENGTH = 50  # Characters of the first user message shown as preview
IMAGE_PREVIEW = "Image"  # Preview used when the first user message has no text

# Local storage keys
CHAT_HISTORY_KEY = "chatHistory"
BOT_NAME_KEY = "chatBotName"
LANGUAGE_KEY = "appLanguage"

# Chat defaults
DEFAULT_BOT_NAME = "AI Health Assistant"
DEFAULT_GREETING = (
    "Hello! I'm your AI health assistant. How can I help you today? "
    "You can describe your symptoms or select a body part to learn more."
)
FOCUS_PREFILL_TEMPLATE = "Tell me about the {topic} and common health issues related to it."

# Model gateway defaults
DEFAULT_MODEL = "google/gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_TIMEOUT = 60.0  # Seconds

# Confidence tiers (inclusive lower bounds)
CONFIDENCE_HIGH = 75
CONFIDENCE_MEDIUM = 50
