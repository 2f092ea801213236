import os
from dotenv import load_dotenv

load_dotenv()

config = {
    # marshmallow unknown-field policy for compiled schemas: raise | exclude | include
    "unknown": os.getenv("SCHEMA_DECORATORS_UNKNOWN", "raise").lower(),
    "debug": os.getenv("SCHEMA_DECORATORS_DEBUG", "0").lower() in ("1", "true", "yes"),
}
