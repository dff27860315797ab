"""
Atlas Incident Backend: FastAPI
Modular entry point. All logic is split across:
  config.py, models.py, coordinates.py, incident_loader.py,
  incident_store.py, filters.py, categories.py, summary.py, routes.py
"""

import logging

logging.basicConfig(level=logging.INFO)

from routes import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
