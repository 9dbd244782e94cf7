import os

from garden import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 3000))
    app.logger.info("Garden app running on http://localhost:%s", port)
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_DEBUG", "False").lower() == "true")
