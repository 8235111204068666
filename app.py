"""Development runner: ``python app.py``.

Production deployments should point a WSGI server at
``step_challenge.main:create_app()`` instead.
"""

import os

from step_challenge.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3000")), debug=app.config["DEBUG"])
