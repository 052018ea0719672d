import base64
import json
import math
from typing import Any

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from pydantic import TypeAdapter, ValidationError
from starlette.concurrency import run_in_threadpool

from solsign.api.container import Container
from solsign.api.dependencies import get_container, read_upload
from solsign.api.errors import BadRequestError
from solsign.api.schemas import (
    DigitalProofIn,
    ElementIn,
    ProofOut,
    SignDocumentResponse,
)
from solsign.logging.logger import Log
from solsign.pdf.exceptions import InvalidDataUrlError
from solsign.pdf.qr import decode_data_url, is_supported_image
from solsign.placement.geometry import Point, Size
from solsign.placement.mapping import ElementPlacement
from solsign.placement.models import ElementKind, PlacedElement
from solsign.signing.digest import document_hash
from solsign.signing.models import ANONYMOUS_SIGNER, DigitalProof

PDF_TYPES = ("application/pdf",)
IMAGE_TYPES = ("image/png", "image/jpeg")

router = APIRouter(tags=["sign"])

_elements_adapter = TypeAdapter(list[ElementIn])


async def _read_pdf(pdf: UploadFile | None, container: Container) -> bytes:
    return await read_upload(
        pdf,
        field="pdf",
        max_bytes=container.settings.max_upload_bytes,
        content_types=PDF_TYPES,
        type_message="Only PDF is allowed for pdf field",
    )


def _parse_json(raw: str | None, field: str) -> Any:
    if raw is None or not raw.strip():
        raise BadRequestError(f"Missing {field}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise BadRequestError(f"{field} must be valid JSON") from exc


def _to_placement(item: ElementIn, index: int) -> ElementPlacement:
    payload: bytes | str = item.payload
    if item.kind is ElementKind.SIGNATURE_IMAGE:
        try:
            payload = decode_data_url(item.payload)
        except InvalidDataUrlError as exc:
            raise BadRequestError(f"Element {index}: signature payload {exc}") from exc

    element = PlacedElement(
        id=item.id or f"element-{index}",
        kind=item.kind,
        payload=payload,
        position=Point(item.x, item.y),
        size=Size(item.width, item.height),
        page_index=item.page_index,
    )
    preview_size = None
    if item.preview_width is not None and item.preview_height is not None:
        preview_size = Size(item.preview_width, item.preview_height)
    return ElementPlacement(element, preview_size)


@router.post("/sign-document")
async def sign_document(
    pdf: UploadFile | None = File(default=None),
    signature_image: UploadFile | None = File(default=None, alias="signatureImage"),
    signature_text: str | None = Form(default=None, alias="signatureText"),
    page_number: int = Form(default=1, alias="pageNumber", ge=1),
    placement: str | None = Form(default=None),
    signer_identity: str | None = Form(default=None, alias="signerIdentity"),
    container: Container = Depends(get_container),
) -> SignDocumentResponse:
    pdf_bytes = await _read_pdf(pdf, container)

    image_bytes = None
    if signature_image is not None:
        image_bytes = await read_upload(
            signature_image,
            field="signatureImage",
            max_bytes=container.settings.max_upload_bytes,
            content_types=IMAGE_TYPES,
            type_message="Signature image must be PNG or JPEG",
        )
    elif not signature_text:
        raise BadRequestError("Missing signatureImage or signatureText")

    rect: dict[str, float] = {}
    if placement:
        parsed = _parse_json(placement, "placement")
        if not isinstance(parsed, dict):
            raise BadRequestError("placement must be a JSON object")
        try:
            rect = {
                key: float(parsed[key])
                for key in ("x", "y", "width", "height")
                if key in parsed
            }
        except (TypeError, ValueError) as exc:
            raise BadRequestError("placement values must be numbers") from exc
        if not all(math.isfinite(value) for value in rect.values()):
            raise BadRequestError("placement values must be finite numbers")

    try:
        signed = await run_in_threadpool(
            container.exporter.sign_document,
            pdf_bytes,
            page_number=page_number,
            placement=rect,
            signature_image=image_bytes,
            signature_text=signature_text,
            signer_identity=signer_identity,
        )
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc

    return SignDocumentResponse(
        signed_pdf_base64=base64.b64encode(signed.pdf_bytes).decode("ascii"),
        sha256=signed.sha256,
        meta={"pageNumber": signed.page_number, "placement": signed.placement},
    )


@router.post("/export-signed-pdf")
async def export_signed_pdf(
    pdf: UploadFile | None = File(default=None),
    elements: str | None = Form(default=None),
    digital_proof: str | None = Form(default=None, alias="digitalProof"),
    qr_code: str | None = Form(default=None, alias="qrCode"),
    container: Container = Depends(get_container),
) -> Response:
    pdf_bytes = await _read_pdf(pdf, container)

    try:
        items = _elements_adapter.validate_python(_parse_json(elements or "[]", "elements"))
        proof_in = DigitalProofIn.model_validate(_parse_json(digital_proof, "digitalProof"))
    except ValidationError as exc:
        raise BadRequestError(f"Invalid export request: {exc.errors()[0]['msg']}") from exc

    try:
        placements = [_to_placement(item, index) for index, item in enumerate(items)]
    except ValueError as exc:
        raise BadRequestError(str(exc)) from exc

    digest = document_hash(pdf_bytes)
    if proof_in.document_hash and proof_in.document_hash.lower() != digest:
        raise BadRequestError("digitalProof.documentHash does not match the uploaded PDF")

    proof = DigitalProof(
        document_hash=digest,
        signer_identity=proof_in.signer_identity or ANONYMOUS_SIGNER,
        signed_at=proof_in.signed_at,
        transaction_reference=proof_in.transaction_reference,
        proof_amount=proof_in.proof_amount,
    )

    qr_png = None
    if qr_code:
        try:
            qr_png = decode_data_url(qr_code)
        except InvalidDataUrlError as exc:
            Log.warning(f"Client QR code unusable, generating server-side: {exc}")
        if qr_png is not None and not is_supported_image(qr_png):
            Log.warning("Client QR code is not a PNG or JPEG, generating server-side")
            qr_png = None

    output = await run_in_threadpool(
        container.exporter.export, pdf_bytes, placements, proof, qr_png
    )
    return Response(
        content=output,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="signed-{digest[:12]}.pdf"'},
    )


@router.post("/inspect-signed-pdf")
async def inspect_signed_pdf(
    pdf: UploadFile | None = File(default=None),
    container: Container = Depends(get_container),
) -> ProofOut:
    pdf_bytes = await _read_pdf(pdf, container)
    proof = await run_in_threadpool(container.exporter.inspect, pdf_bytes)
    return ProofOut.from_proof(proof)
