"""
WSGI entry point for serverless deployments.
"""

import os
from app import create_app

# Module-level instance picked up by the serverless runtime
app = create_app()

if __name__ == "__main__":
    app.run(debug=False, host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
