import logging
from typing import List, Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Response

from .config import Settings
from .decode import decode_csv_bytes
from .errors import EntryNotFoundError, InvalidInputError
from .history import HistoryStore
from .models import (
    ConvertRequest,
    ConvertResponse,
    CopyPart,
    CopyResponse,
    FileConvertResponse,
    HealthResponse,
    HistoryEntry,
    HistoryExport,
    RenameRequest,
)
from .rules import EXAMPLE_CSV
from .session import ConverterSession
from .storage import FileStorage, MemoryClipboard

logger = logging.getLogger(__name__)


def build_session(settings: Settings) -> ConverterSession:
    store = HistoryStore(FileStorage(settings.history_path))
    store.load()
    return ConverterSession(store, MemoryClipboard(), skip_blank_lines=settings.skip_blank_lines)


def _invalid_input(e: InvalidInputError) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": str(e), "example": EXAMPLE_CSV})


def create_app(session: Optional[ConverterSession] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    if session is None:
        session = build_session(settings)

    app = FastAPI(
        title="csvjson",
        description="CSV to JSON conversion with a persisted history",
        version="0.1.0",
    )
    app.state.session = session

    def _entry_or_404(entry_id: str) -> HistoryEntry:
        try:
            return session.get(entry_id)
        except EntryNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"ok": True}

    @app.post("/convert", response_model=ConvertResponse)
    def convert_text(body: ConvertRequest):
        try:
            return session.convert(body.csv)
        except InvalidInputError as e:
            raise _invalid_input(e)

    @app.post("/convert/file", response_model=FileConvertResponse)
    async def convert_file(file: UploadFile = File(...)):
        if not file.filename.lower().endswith(".csv"):
            raise HTTPException(status_code=422, detail="Only CSV files are supported")

        raw = await file.read()
        text, report = decode_csv_bytes(raw)
        try:
            result = session.convert(text)
        except InvalidInputError as e:
            raise _invalid_input(e)
        return FileConvertResponse(**result.model_dump(by_alias=True), decoding=report)

    @app.get("/history", response_model=List[HistoryEntry])
    def list_history(q: Optional[str] = None):
        if q is not None:
            session.search_term = q
        return session.visible_history()

    @app.get("/history/export", response_model=HistoryExport)
    def export_history():
        return {"count": len(session.store.entries), "text": session.store.export_text()}

    @app.get("/history/{entry_id}", response_model=HistoryEntry)
    def get_entry(entry_id: str):
        return _entry_or_404(entry_id)

    @app.patch("/history/{entry_id}", response_model=HistoryEntry)
    def rename_entry(entry_id: str, body: RenameRequest):
        _entry_or_404(entry_id)
        session.rename(entry_id, body.name)
        return session.get(entry_id)

    @app.delete("/history/{entry_id}", status_code=204)
    def delete_entry(entry_id: str):
        session.delete(entry_id)
        return Response(status_code=204)

    @app.post("/history/{entry_id}/copy/{part}", response_model=CopyResponse)
    def copy_entry(entry_id: str, part: CopyPart):
        _entry_or_404(entry_id)
        text = session.copy_csv(entry_id) if part is CopyPart.csv else session.copy_json(entry_id)
        return {"part": part, "text": text}

    return app


app = create_app()
