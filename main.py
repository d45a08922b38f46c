import uvicorn

from notification_server.main import create_app

app = create_app()


if __name__ == "__main__":
    settings = app.state.settings
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
