#!/usr/bin/env python3
"""
Start the admin API with uvicorn from the project root, so that `api` and
`aiaio_core` import without installing the package.
"""

import os
import sys
from pathlib import Path

project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    print(f"🚀 Starting API on http://localhost:{port}")
    print(f"📖 Docs at http://localhost:{port}/docs")
    uvicorn.run("api.main:app", host="0.0.0.0", port=port, reload=True)
