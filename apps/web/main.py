"""FastAPI web application for pkgshape."""

from typing import Any

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from pkgshape.errors import ManifestSyntaxError
from pkgshape.jsonschema import manifest_json_schema
from pkgshape.models import ValidationOptions
from pkgshape.validate import validate_text

app = FastAPI(
    title="pkgshape",
    description="Check package.json manifests against the manifest shape",
    version="0.1.0",
)


class ValidateRequest(BaseModel):
    """Request model for validating a manifest."""
    content: str
    reject_unknown: bool = False
    strict_version: bool = False


class Violation(BaseModel):
    """A single shape violation."""
    path: str
    kind: str
    expected: str
    actual: Any = None
    message: str


class ValidateResponse(BaseModel):
    """Response model for manifest validation."""
    valid: bool
    violations: list[Violation]


@app.get("/", response_class=HTMLResponse)
async def home():
    """Serve the help page."""
    return get_index_html()


@app.post("/api/validate", response_model=ValidateResponse)
async def validate_manifest(request: ValidateRequest):
    """Validate manifest text."""
    content = request.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="No content provided")

    options = ValidationOptions(
        reject_unknown=request.reject_unknown,
        strict_version=request.strict_version,
    )
    try:
        violations = validate_text(content, options)
    except ManifestSyntaxError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ValidateResponse(
        valid=not violations,
        violations=[Violation(**violation.to_dict()) for violation in violations],
    )


@app.post("/api/upload", response_model=ValidateResponse)
async def upload_file(
    file: UploadFile = File(...),
    reject_unknown: bool = Form(False),
    strict_version: bool = Form(False),
):
    """Upload and validate a package.json file."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        text_content = (await file.read()).decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be valid UTF-8 text")

    request = ValidateRequest(
        content=text_content,
        reject_unknown=reject_unknown,
        strict_version=strict_version,
    )
    return await validate_manifest(request)


@app.get("/api/schema")
async def json_schema():
    """Return the manifest shape as a JSON Schema document."""
    return manifest_json_schema()


def get_index_html() -> str:
    """Return the help page."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>pkgshape - Manifest Checker</title>
    </head>
    <body>
        <h1>pkgshape</h1>
        <p>Check package.json manifests against the manifest shape.</p>
        <ul>
            <li><code>POST /api/validate</code> with <code>{"content": "..."}</code></li>
            <li><code>POST /api/upload</code> with a <code>file</code> form field</li>
            <li><code>GET /api/schema</code> for the JSON Schema document</li>
        </ul>
    </body>
    </html>
    """


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
