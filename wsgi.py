"""WSGI entry point for gunicorn."""
from prompt_party import create_app

app = create_app()

if __name__ == "__main__":
    from prompt_party.extensions import socketio
    socketio.run(app, host="0.0.0.0", port=5000, debug=True)
