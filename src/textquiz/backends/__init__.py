from .gemini import GeminiClient, extract_json, image_part, text_part

__all__ = ["GeminiClient", "extract_json", "image_part", "text_part"]
