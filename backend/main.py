from __future__ import annotations

from userhub.app import create_application

app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=app.state.container.config.port)
