import io

import pytest

from storage import resume_filename, save_resume


@pytest.mark.parametrize("original, expected", [
    ("resume.pdf", "resume.pdf"),
    ("Resume.PDF", "Resume.PDF"),
    ("resume", "resume.pdf"),
    ("resume.docx", "resume.docx.pdf"),
    ("../../etc/passwd", "passwd.pdf"),
    ("C:\\Users\\jane\\cv.pdf", "cv.pdf"),
    (".", "unnamed_file.pdf"),
    ("/", "unnamed_file.pdf"),
    ("..", "unnamed_file.pdf"),
    ("", "unnamed_file.pdf"),
])
def test_resume_filename(original, expected):
    assert resume_filename(original) == expected


def test_save_resume_writes_file(tmp_path):
    url = save_resume(io.BytesIO(b"%PDF-1.7"), "cv", str(tmp_path))

    assert url == "/uploads/cv.pdf"
    assert (tmp_path / "cv.pdf").read_bytes() == b"%PDF-1.7"


def test_save_resume_overwrites_same_name(tmp_path):
    save_resume(io.BytesIO(b"old"), "cv.pdf", str(tmp_path))
    save_resume(io.BytesIO(b"new"), "cv.pdf", str(tmp_path))

    assert (tmp_path / "cv.pdf").read_bytes() == b"new"


def test_save_resume_creates_directory(tmp_path):
    target = tmp_path / "nested" / "uploads"
    save_resume(io.BytesIO(b"x"), "a.pdf", str(target))
    assert (target / "a.pdf").exists()
