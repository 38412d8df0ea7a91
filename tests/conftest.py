import os

# settings is instantiated at import time and requires a key.
os.environ.setdefault("OPENAI_API_KEY", "test-key")
