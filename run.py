from localtv.main import app, run  # noqa: F401

# Run the local TV service (or: uvicorn run:app)
if __name__ == "__main__":
    run()
