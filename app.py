# app.py - 서버 진입점
import os
from lessonhub.app import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.logger.info("🚀 Flask 서버 시작")

    if os.environ.get('RAILWAY_ENVIRONMENT'):
        app.run(host="0.0.0.0", port=port, debug=False)
    else:
        app.run(host="0.0.0.0", port=port, debug=True)
