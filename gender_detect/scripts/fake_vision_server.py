"""
Fake Gemini server for running the service without an API key.

Answers POST /v1beta/models/<model>:generateContent with a canned reply,
shaped like the real endpoint's response.

Usage:
    python -m gender_detect.scripts.fake_vision_server            (terminal 1)
    GEMINI_BASE_URL=http://localhost:9100 GEMINI_API_KEY=fake \\
        uvicorn gender_detect.web.app:app                           (terminal 2)

FAKE_REPLY sets the text returned (default: Female).
"""

import os
import time
import uvicorn
from fastapi import FastAPI, Request

app = FastAPI(title="fake-vision-server")

REPLY = os.getenv("FAKE_REPLY", "Female")


@app.post("/v1beta/models/{model}:generateContent")
async def generate_content(model: str, request: Request):
    body = await request.json()
    parts = body["contents"][0]["parts"]
    image = next((p["inline_data"] for p in parts if "inline_data" in p), None)
    prompt = next((p["text"] for p in parts if "text" in p), "")
    if image is None:
        print(f"[vision] {model}: request without inline image")
    else:
        print(f"[vision] {model}: {image['mime_type']} ({len(image['data'])} b64 chars), prompt {len(prompt)} chars")
    time.sleep(0.3)
    print(f"[vision] reply {REPLY!r}")
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": REPLY}]}}]}


if __name__ == "__main__":
    print("Fake vision server starting on http://localhost:9100")
    uvicorn.run(app, host="0.0.0.0", port=9100)
