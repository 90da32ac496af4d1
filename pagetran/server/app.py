"""
HTTP surface: upload a PDF, get the translated PDF back.

Routes:
    GET  /               minimal browser uploader
    GET  /health         liveness probe
    POST /api/translate  multipart upload (field ``file``) -> application/pdf
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from pagetran import __version__
from pagetran.core.exceptions import PipelineError
from pagetran.core.pipeline import PipelineConfig, TranslationPipeline

logger = logging.getLogger(__name__)

UPLOAD_PAGE = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>PageTran</title></head>
<body style="max-width: 640px; margin: 40px auto; font-family: sans-serif">
  <h1>PDF translation</h1>
  <input id="file" type="file" accept="application/pdf">
  <button id="go" style="margin-left: 12px" disabled>Translate and download</button>
  <p id="status" style="margin-top: 16px; color: #666">
    Output keeps plain text only; the original layout is not preserved.
  </p>
  <script>
    const input = document.getElementById('file');
    const button = document.getElementById('go');
    const status = document.getElementById('status');
    input.onchange = () => { button.disabled = !input.files.length; };
    button.onclick = async () => {
      const form = new FormData();
      form.append('file', input.files[0]);
      button.disabled = true;
      button.textContent = 'Translating...';
      try {
        const resp = await fetch('/api/translate', { method: 'POST', body: form });
        if (!resp.ok) {
          const err = await resp.json();
          status.textContent = 'Failed: ' + (err.detail || err.error);
          return;
        }
        const url = URL.createObjectURL(await resp.blob());
        const a = document.createElement('a');
        a.href = url; a.download = 'translated.pdf'; a.click();
        status.textContent = 'Done.';
      } finally {
        button.disabled = false;
        button.textContent = 'Translate and download';
      }
    };
  </script>
</body>
</html>
"""


def _spool(source, fd: int, temp_path: Path) -> bytes:
    """Copy the upload into its temp file and read it back."""
    with os.fdopen(fd, "wb") as out:
        shutil.copyfileobj(source, out)
    return temp_path.read_bytes()


def create_app(
    config: Optional[PipelineConfig] = None,
    pipeline: Optional[TranslationPipeline] = None
) -> FastAPI:
    """
    Build the FastAPI application around one pipeline instance.

    Args:
        config: Pipeline configuration (also supplies ``upload_dir``)
        pipeline: Pre-built pipeline; created from ``config`` if omitted
    """
    config = config or (pipeline.config if pipeline else PipelineConfig())
    pipeline = pipeline or TranslationPipeline(config)
    upload_dir = Path(config.upload_dir)

    app = FastAPI(title="PageTran", version=__version__)
    app.state.pipeline = pipeline

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return UPLOAD_PAGE

    @app.get("/health", response_class=PlainTextResponse)
    async def health():
        return "ok"

    @app.post("/api/translate")
    async def translate(file: Optional[UploadFile] = File(None)):
        if file is None:
            return JSONResponse(status_code=400, content={"error": "no_file"})

        upload_dir.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(suffix=".pdf", dir=upload_dir)
        temp_path = Path(temp_name)
        try:
            data = await run_in_threadpool(_spool, file.file, fd, temp_path)
            logger.info(f"=== Processing upload: {file.filename} ({len(data)} bytes) ===")

            try:
                output = await app.state.pipeline.translate_pdf(data)
            except PipelineError as e:
                logger.error(f"Translation failed for {file.filename}: {e}")
                return JSONResponse(status_code=500, content=e.to_payload())

            logger.info(f"Sending translated PDF for {file.filename} ({len(output)} bytes)")
            return Response(
                content=output,
                media_type="application/pdf",
                headers={"Content-Disposition": "attachment; filename=translated.pdf"}
            )
        finally:
            temp_path.unlink(missing_ok=True)

    return app
