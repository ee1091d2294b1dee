import pytest

from hireline.core.exceptions import ExtractionError, ResumeFileNotFoundError, UnsupportedFormatError
from hireline.services.text_extraction import extract_text, normalize_extension, resolve_resume_path
from tests.factories import RESUME_TEXT, build_docx, build_pdf

def test_extract_pdf(tmp_path):
    path = tmp_path / "cv.pdf"
    path.write_bytes(build_pdf(RESUME_TEXT))
    text = extract_text(str(path))
    assert "Jane Doe" in text
    assert "Senior Python Engineer" in text

def test_extract_docx_paragraphs_and_tables(tmp_path):
    path = tmp_path / "cv.docx"
    build_docx(path, ["Jane Doe", "Python developer"], table_rows=[["Skills", "FastAPI"]])
    text = extract_text(str(path))
    assert "Jane Doe" in text
    assert "Python developer" in text
    assert "Skills | FastAPI" in text

def test_declared_extension_wins_over_path(tmp_path):
    path = tmp_path / "upload.bin"
    path.write_bytes(build_pdf(RESUME_TEXT))
    assert "Jane Doe" in extract_text(str(path), "PDF")

def test_missing_file(tmp_path):
    with pytest.raises(ResumeFileNotFoundError) as exc:
        extract_text(str(tmp_path / "ghost.pdf"))
    assert exc.value.status_code == 404
    assert exc.value.error_code == "FILE_NOT_FOUND"

@pytest.mark.parametrize("name", ["cv.txt", "cv.doc", "cv.rtf", "cv"])
def test_unsupported_extension_is_rejected_before_parsing(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"plain text resume")
    with pytest.raises(UnsupportedFormatError) as exc:
        extract_text(str(path))
    assert exc.value.extension == normalize_extension(path.suffix)

def test_corrupt_pdf(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf at all")
    with pytest.raises(ExtractionError):
        extract_text(str(path))

def test_corrupt_docx(tmp_path):
    path = tmp_path / "broken.docx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(ExtractionError):
        extract_text(str(path))

def test_encrypted_pdf(tmp_path):
    from PyPDF2 import PdfWriter

    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.encrypt("secret")
    path = tmp_path / "locked.pdf"
    with open(path, "wb") as f:
        writer.write(f)

    with pytest.raises(ExtractionError):
        extract_text(str(path))

def test_pdf_without_text_returns_empty_string(tmp_path):
    path = tmp_path / "blank.pdf"
    path.write_bytes(build_pdf(""))
    assert extract_text(str(path)) == ""

def test_normalize_extension():
    assert normalize_extension("PDF") == ".pdf"
    assert normalize_extension(".Docx") == ".docx"
    assert normalize_extension(None) == ""

def test_resolve_resume_path_stays_in_upload_dir(upload_dir):
    assert resolve_resume_path("../../etc/passwd") == str(upload_dir / "passwd")
