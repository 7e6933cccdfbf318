from src.app import AppSettings, run_study

__all__ = ["main"]


def main() -> None:
    """Entry point for the application."""
    settings = AppSettings.from_env()
    run_study(settings)


if __name__ == "__main__":
    main()
