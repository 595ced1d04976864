import uvicorn

from shared.config.settings import load_settings
from services.payment_service.main import create_app

settings = load_settings()

app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(app, host=settings.app_host, port=settings.app_port)
