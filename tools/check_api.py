#!/usr/bin/env python3
"""
Check that the API's dependencies and modules import and that the app builds.

Run: python tools/check_api.py
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

print("🔍 Checking API dependencies and layout...\n")

print("1. Dependencies:")
try:
    import fastapi
    import pydantic
    import uvicorn
    print(f"   ✅ FastAPI {fastapi.__version__}")
    print(f"   ✅ Pydantic {pydantic.__version__}")
    print(f"   ✅ Uvicorn {uvicorn.__version__}")
except ImportError as e:
    print(f"   ❌ Missing dependency: {e}")
    sys.exit(1)

print("\n2. Core modules:")
try:
    from aiaio_core.config import get_settings
    from aiaio_core.videos import playlists, coverage  # noqa: F401
    print("   ✅ aiaio_core")
except ImportError as e:
    print(f"   ❌ Error importing core: {e}")
    sys.exit(1)

print("\n3. App:")
try:
    from api.main import app
    print(f"   ✅ {app.title} {app.version}")
except Exception as e:
    print(f"   ❌ Error building app: {e}")
    sys.exit(1)

print("\n4. Routes:")
for route in app.routes:
    methods = ",".join(sorted(getattr(route, "methods", None) or []))
    print(f"   {methods:<10} {route.path}")

print("\n5. Configuration:")
settings = get_settings()
for label, value in (
    ("SUPABASE_URL", settings.supabase_url),
    ("SUPABASE_SERVICE_ROLE_KEY", settings.supabase_service_role_key),
    ("OPENAI_API_KEY", settings.openai_api_key),
    ("CLOUDFRONT domain", settings.cloudfront_domain),
):
    print(f"   {'✅' if value else '⚠️ '} {label}")

print("\n✅ API check complete")
