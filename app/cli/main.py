import typer
import requests
import os


app = typer.Typer()
BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")


@app.command()
def serve(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("app.api.main:app", host=host, port=port)


@app.command()
def predict():
    r = requests.get(f"{BASE}/api/taixiu/predict", timeout=30)
    typer.echo(r.json())


@app.command()
def stats(window: int = typer.Option(None)):
    r = requests.get(f"{BASE}/stats", params={"window": window} if window else {}, timeout=30)
    typer.echo(r.json())


if __name__ == "__main__":
    app()
