def main() -> None:
    """Entry point for the application: start the API server."""
    from jobpilot.api.main import main as api_main

    api_main()
