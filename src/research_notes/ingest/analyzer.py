from __future__ import annotations

import base64
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from langchain.chat_models import init_chat_model
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from research_notes.config import default_config, section
from research_notes.utils.text_cleaning import collapse_whitespace, strip_code_fence
from research_notes.vectorstore.schemas import ContentTags


logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """Analyze this content and provide:
1. A brief description focusing on insights and significance (2-3 sentences max)
2. Extract these tags as JSON:
   - organization: string (institution/company mentioned)
   - source_type: "primary" | "secondary" | "tertiary"
   - people: array of names mentioned
   - content_category: "chart" | "research" | "interview" | "opinion" | "data" | "analysis" | "other"
   - industry: string (main industry/domain)
   - content_date: string (date of content if mentioned, null if not)

Focus on second-order meaning - what does this tell us? Why is it significant? What are the implications?

Format response as:
DESCRIPTION: [your description]
TAGS: [JSON object]

Content: {content}"""

_DESCRIPTION_RE = re.compile(r"DESCRIPTION:\s*(.*?)(?=TAGS:|$)", re.S)
_TAGS_RE = re.compile(r"TAGS:\s*(.*)", re.S)


@dataclass
class Analysis:
    description: str = ""
    tags: ContentTags = field(default_factory=ContentTags)


def parse_analysis(response: str) -> Analysis:
    """Split a model reply into its DESCRIPTION and TAGS blocks.

    A missing block yields an empty value; TAGS that are not a JSON object are
    logged and ignored.
    """
    response = response or ""
    desc_match = _DESCRIPTION_RE.search(response)
    tags_match = _TAGS_RE.search(response)

    description = collapse_whitespace(desc_match.group(1)) if desc_match else ""
    tags: Dict[str, Any] = {}
    if tags_match:
        raw = strip_code_fence(tags_match.group(1))
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.warning("Could not parse TAGS block as JSON: %s", e)
        else:
            if isinstance(parsed, dict):
                tags = parsed
            else:
                logger.warning("TAGS block is not a JSON object: %r", raw[:200])

    return Analysis(description=description, tags=ContentTags.from_dict(tags))


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content or "")


class ContentAnalyzer:
    """Writes a description and structured tags for a content item with a chat model.

    The model is built from the `analysis_model` section of config.yaml via
    LangChain's init_chat_model unless one is passed in.
    """

    def __init__(
        self,
        *,
        config: Optional[Dict[str, Any]] = None,
        chat_model: Optional[BaseChatModel] = None,
    ) -> None:
        if chat_model is not None:
            self._model = chat_model
            return

        cfg = config if config is not None else default_config()
        model_cfg = section(cfg, "analysis_model")
        provider = model_cfg.pop("provider", None)
        model = model_cfg.pop("model", None)
        if not provider or not model:
            raise ValueError(
                "Analysis configuration missing 'provider' and/or 'model'. "
                "Set them in config.yaml under 'analysis_model'."
            )
        logger.info("Initializing analysis model provider=%s model=%s", provider, model)
        self._model = init_chat_model(model, model_provider=provider, **model_cfg)

    async def aanalyze(
        self,
        content_text: str = "",
        *,
        image_bytes: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
    ) -> Analysis:
        """Annotate text and/or an image.

        Provider errors are logged and produce an empty Analysis, so ingestion
        can still store the item.
        """
        parts: List[Dict[str, Any]] = [
            {"type": "text", "text": ANALYSIS_PROMPT.format(content=content_text or "")}
        ]
        if image_bytes:
            encoded = base64.b64encode(image_bytes).decode("ascii")
            parts.append(
                {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}}
            )

        try:
            reply = await self._model.ainvoke([HumanMessage(content=parts)])
        except Exception as e:
            logger.error("Content analysis failed: %s", e)
            return Analysis()
        return parse_analysis(_message_text(reply))
