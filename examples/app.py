from dotenv import load_dotenv

from flask_google_login import create_app

# Load environment variables from .env file (for local development)
load_dotenv()

app = create_app()


if __name__ == '__main__':
    app.run(debug=True, port=8080)
