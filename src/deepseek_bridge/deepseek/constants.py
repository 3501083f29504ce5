"""deepseek.constants

Vendor-wide constants for the DeepSeek OpenAI-compatible API.
"""

from __future__ import annotations

PROVIDER_NAME = 'deepseek'

CODER_MODEL = 'deepseek-coder'

CHAT_PATH = '/chat/completions'
MODELS_PATH = '/models'

#: Seconds; used when the settings carry no timeout.
DEFAULT_CHAT_TIMEOUT = 60
DEFAULT_MODELS_TIMEOUT = 12

#: Context window assumed for catalog entries that do not report one.
DEFAULT_CONTEXT_WINDOW = 32_768

#: Bytes pulled from the response body per read while streaming.
STREAM_CHUNK_SIZE = 1024

MODELS_CACHE_KEY_TEMPLATE = 'deepseek-bridge-models-{provider}'
OPTIONS_CACHE_KEY_TEMPLATE = 'deepseek-bridge-form-models-{provider}'

SUPPORTED_LANGUAGES: tuple[str, ...] = (
    'python', 'javascript', 'typescript', 'java', 'c++', 'c#',
    'go', 'rust', 'php', 'ruby', 'swift', 'kotlin', 'scala',
    'r', 'matlab', 'sql', 'shell', 'powershell', 'dockerfile',
    'yaml', 'json', 'xml', 'html', 'css', 'markdown',
)  # fmt: skip
