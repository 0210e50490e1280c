"""
Backend Entry Point
Run with: python main.py
Or: uvicorn campusvault.main:app --reload
"""
import uvicorn

from campusvault.core.config import settings

if __name__ == "__main__":
    uvicorn.run("campusvault.main:app", host=settings.HOST, port=settings.PORT, reload=settings.is_development)
