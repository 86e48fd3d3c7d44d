import re
import time
from typing import Any, Callable, Dict, List, Optional

from openai import APIConnectionError, APIStatusError, OpenAI
from opentelemetry import trace

from .config import Settings
from .exceptions import ClientInputError, ConfigurationError, ModelOutputError, UpstreamError
from .logging import hash_preview, jlog
from .parsing import parse_model_reply
from .prompt import build_messages, resolve_style
from .render import render_report
from .schemas import AuditReport, AuditRequest, AuditResponse

tracer = trace.get_tracer("translation_audit.audit")

SCORE_PATTERN = re.compile(r"^[1-5]/[1-5]/[1-5]$")
SEVERITIES = {"minor", "moderate", "critical"}

def make_client(settings: Settings) -> OpenAI:
    if not settings.openai_api_key:
        raise ConfigurationError("Missing OPENAI_API_KEY")
    kwargs: Dict[str, Any] = dict(api_key=settings.openai_api_key, max_retries=0)
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return OpenAI(**kwargs)

ClientFactory = Callable[[Settings], OpenAI]

def _call_model(
    client: OpenAI,
    messages: List[Dict[str, str]],
    settings: Settings,
    correlation_id: Optional[str],
) -> str:
    kwargs: Dict[str, Any] = dict(
        model=settings.audit_model,
        messages=messages,
        temperature=settings.audit_temperature,
    )
    if settings.audit_prompt_mode == "json":
        kwargs["response_format"] = {"type": "json_object"}
    if settings.audit_timeout_s is not None:
        kwargs["timeout"] = settings.audit_timeout_s

    try:
        start = time.time()
        completion = client.chat.completions.create(**kwargs)  # type: ignore
        elapsed = time.time() - start
    except APIStatusError as e:
        # Upstream body is surfaced verbatim for diagnosis
        raise UpstreamError(f"OpenAI error: {e.response.text}") from e
    except APIConnectionError as e:
        raise UpstreamError(f"OpenAI error: {e}") from e

    choices = getattr(completion, "choices", None) or []
    content = choices[0].message.content if choices else None

    usage = getattr(completion, "usage", None)
    jlog(
        event="audit_model_response",
        correlation_id=correlation_id,
        model_name=settings.audit_model,
        prompt_mode=settings.audit_prompt_mode,
        latency_ms=int(elapsed * 1000),
        reply=hash_preview(content or ""),
        prompt_tokens=getattr(usage, "prompt_tokens", None),
        completion_tokens=getattr(usage, "completion_tokens", None),
        total_tokens=getattr(usage, "total_tokens", None),
    )
    return (content or "").strip()

def check_rows(report: AuditReport, strict: bool, correlation_id: Optional[str] = None) -> None:
    """
    Score must read "A/I/C" with each axis 1-5; severity must be one of
    minor/moderate/critical. Empty values are allowed. Strict mode rejects the
    report, lenient mode only logs.
    """
    for position, row in enumerate(report.rows, start=1):
        problems = []
        if row.score and not SCORE_PATTERN.match(row.score.strip()):
            problems.append("score")
        if row.severity and row.severity.strip().lower() not in SEVERITIES:
            problems.append("severity")
        if not problems:
            continue
        if strict:
            raise ModelOutputError(f"Model report row {position} has invalid {' and '.join(problems)}")
        jlog(
            event="audit_row_nonconforming",
            severity="WARNING",
            correlation_id=correlation_id,
            row=position,
            fields=problems,
        )

def generate_audit_html(
    req: AuditRequest,
    settings: Settings,
    client_factory: ClientFactory = make_client,
    correlation_id: Optional[str] = None,
) -> AuditResponse:
    client = client_factory(settings)

    if not req.src or not req.tgt:
        raise ClientInputError("Missing source or translation")

    style = resolve_style(req.style, settings.audit_default_style)
    jlog(
        event="audit_start",
        correlation_id=correlation_id,
        src=hash_preview(req.src),
        tgt=hash_preview(req.tgt),
        custom_style=bool(req.style),
        prompt_mode=settings.audit_prompt_mode,
    )

    with tracer.start_as_current_span("TranslationAudit") as span:
        span.set_attribute("operation", "translation_audit")
        span.set_attribute("model_name", settings.audit_model)
        span.set_attribute("prompt_mode", settings.audit_prompt_mode)
        span.set_attribute("src_preview", hash_preview(req.src))
        span.set_attribute("correlation_id", correlation_id or "")

        messages = build_messages(req.src, req.tgt, style, settings.audit_prompt_mode)
        content = _call_model(client, messages, settings, correlation_id)

        report = AuditReport.model_validate(parse_model_reply(content))
        check_rows(report, settings.audit_strict_scores, correlation_id)
        html = render_report(report)

        span.set_attribute("rows", len(report.rows))
        jlog(
            event="audit_ok",
            correlation_id=correlation_id,
            rows=len(report.rows),
            rules=len(report.rules),
        )
        return AuditResponse(html=html)
