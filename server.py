#!/usr/bin/env python3
"""
server.py - Template expansion service

FastAPI-based server that expands template bundles against request data.
Bundles are read from the directory named by JSONEXPAND_TEMPLATE_DIR
(default: examples).
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Response

from jsonexpand import CompileError, ExpansionError, compute_functions
from jsonexpand.config import TemplateLoader

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="JSON Template Expansion API", version="1.0.0")

# Initialize components
template_loader = TemplateLoader(os.environ.get("JSONEXPAND_TEMPLATE_DIR", "examples"))


@app.post("/expand/{name}")
async def expand_template(
    name: str,
    data: Optional[Dict[str, Any]] = Body(None),
    missing_key_errors: bool = False,
):
    """
    Expand a template bundle.

    Args:
        name: Bundle name (directory under the template directory)
        data: Input document; the bundle's input.json is used when omitted
        missing_key_errors: Fail instead of dropping entries with missing keys

    Returns:
        The expanded document, in template key order
    """
    try:
        bundle = template_loader.load_bundle(name)
        template = bundle.build(
            functions=compute_functions(),
            missing_key_errors=missing_key_errors,
        )
        result = template.expand(data if data is not None else bundle.input)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (CompileError, ExpansionError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.exception("Error expanding template %r", name)
        raise HTTPException(status_code=500, detail=f"Error expanding template: {str(e)}")

    # Return the serialized text as-is so key order survives
    return Response(content=result, media_type="application/json")


@app.get("/templates")
async def list_templates():
    """List the available template bundles."""
    return {"templates": template_loader.available_bundles()}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
