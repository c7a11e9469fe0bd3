"""WSGI entry point for Gunicorn."""
from bellavibe import create_app

# Create the application instance
app = create_app()

if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8080)
