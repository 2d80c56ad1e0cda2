import base64
import hashlib
import logging

from fastapi import Depends, FastAPI, UploadFile, File, HTTPException

from .config import ConverterSettings, load_settings
from .convert import convert_bytes, converted_filename
from .errors import ConversionError
from .logger import get_logger
from .models import ConvertResponse, HealthResponse

logger = logging.getLogger("logconv.api")

app = FastAPI(
    title="logconv",
    description="Converts E004 sensor-log bundles into one row per timestamp",
    version="0.1.0",
)


def get_settings() -> ConverterSettings:
    """Settings for one request, read from $LOGCONV_CONFIG when set."""
    settings = load_settings()
    get_logger("logconv", level=settings.log_level, log_dir=settings.log_dir)
    return settings


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/convert", response_model=ConvertResponse)
async def convert_log(
    file: UploadFile = File(...),
    settings: ConverterSettings = Depends(get_settings),
):
    if not file.filename:
        raise HTTPException(status_code=422, detail="Uploaded file has no filename")

    raw = await file.read()
    try:
        result = convert_bytes(raw, settings)
    except ConversionError as e:
        logger.warning("Conversion of %s failed: %s", file.filename, e)
        raise HTTPException(status_code=422, detail=e.as_dict())

    body = "".join(line + settings.line_terminator for line in result.lines())
    data = body.encode(settings.output_encoding)
    return {
        "filename": converted_filename(file.filename, settings.output_suffix),
        "converted": {
            "sha256": hashlib.sha256(data).hexdigest(),
            "encoding": settings.output_encoding,
            "content_b64": base64.b64encode(data).decode("ascii"),
        },
        "report": result.report.model_dump(),
    }
