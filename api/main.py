from api.app import create_app

app = create_app()


def run() -> None:
    import uvicorn
    uvicorn.run("api.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
