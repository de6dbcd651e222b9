"""
Tests for attachment vetting: batch limit, per-file rules and removal.
"""

from __future__ import annotations

from contact_wizard.application.exceptions import AttachmentRejected
from contact_wizard.application.use_cases.vet_attachments import (
    EXTENSION_NOT_ALLOWED,
    INVALID_FILENAME,
    MAX_ATTACHMENT_BYTES,
    TOO_LARGE,
    TOO_SMALL,
    TYPE_NOT_ALLOWED,
    AttachmentVetter,
    file_extension,
    remove_at,
)
from contact_wizard.domain.entities.attachment import CandidateFile


def _pdf(name: str = "plan.pdf", size: int = 2048) -> CandidateFile:
    return CandidateFile(name=name, content_type="application/pdf", content=b"%" * size)


def _rejection_reason(candidate: CandidateFile) -> str:
    try:
        AttachmentVetter().check(candidate)
    except AttachmentRejected as e:
        return e.reason
    raise AssertionError(f"{candidate.name} was accepted")


def test_valid_files_are_accepted():
    vetter = AttachmentVetter()
    report = vetter.vet(
        [_pdf(), CandidateFile(name="photo.JPG", content_type="image/jpeg", content=b"j" * 500)],
        accepted=[],
    )

    assert report.rejections == ()
    assert [a.name for a in report.attachments] == ["plan.pdf", "photo.JPG"]
    assert report.attachments[1].extension == "jpg"
    assert report.attachments[0].byte_size == 2048
    assert report.success_message == "2 file(s) added successfully."
    assert report.error_message is None


def test_batch_over_limit_is_rejected_entirely():
    """Offering more files than free slots adds none of them."""
    vetter = AttachmentVetter()
    first = vetter.vet([_pdf(f"doc{i}.pdf") for i in range(4)], accepted=[])
    assert len(first.attachments) == 4

    second = vetter.vet([_pdf("a.pdf"), _pdf("b.pdf")], accepted=first.attachments)
    assert second.limit_exceeded
    assert second.added == ()
    assert second.attachments == first.attachments
    assert second.error_message == "A maximum of 5 files is allowed."


def test_filling_the_last_slot_is_allowed():
    vetter = AttachmentVetter()
    first = vetter.vet([_pdf(f"doc{i}.pdf") for i in range(4)], accepted=[])
    second = vetter.vet([_pdf("last.pdf")], accepted=first.attachments)
    assert not second.limit_exceeded
    assert len(second.attachments) == 5


def test_rule_order_per_file():
    """The first broken rule wins: extension, type, size, then filename."""
    assert _rejection_reason(CandidateFile("notes.txt", "application/pdf", b"x" * 500)) == EXTENSION_NOT_ALLOWED
    assert _rejection_reason(CandidateFile("noextension", "application/pdf", b"x" * 500)) == EXTENSION_NOT_ALLOWED
    assert _rejection_reason(CandidateFile("plan.pdf", "text/plain", b"x" * 500)) == TYPE_NOT_ALLOWED
    assert _rejection_reason(CandidateFile("plan.pdf", None, b"x" * 500)) == TYPE_NOT_ALLOWED
    assert _rejection_reason(CandidateFile("plan.pdf", "application/pdf", b"x" * 99)) == TOO_SMALL
    assert _rejection_reason(
        CandidateFile("plan.pdf", "application/pdf", declared_size=MAX_ATTACHMENT_BYTES + 1)
    ) == TOO_LARGE
    assert _rejection_reason(CandidateFile("plan (1)#.pdf", "application/pdf", b"x" * 500)) == INVALID_FILENAME
    # bad extension and too small: extension reported
    assert _rejection_reason(CandidateFile("a.exe", "application/pdf", b"")) == EXTENSION_NOT_ALLOWED


def test_size_bounds_are_inclusive():
    vetter = AttachmentVetter()
    assert vetter.check(_pdf(size=100)).byte_size == 100
    exact = CandidateFile("big.pdf", "application/pdf", declared_size=MAX_ATTACHMENT_BYTES)
    assert vetter.check(exact).byte_size == MAX_ATTACHMENT_BYTES


def test_too_large_message_reports_size():
    candidate = CandidateFile("big.pdf", "application/pdf", declared_size=6 * 1024 * 1024)
    try:
        AttachmentVetter().check(candidate)
    except AttachmentRejected as e:
        assert e.message == "File exceeds 5MB (6.00MB)."
    else:
        raise AssertionError("oversized file accepted")


def test_mixed_batch_keeps_valid_files_and_reports_each_rejection():
    vetter = AttachmentVetter()
    report = vetter.vet(
        [_pdf("ok.pdf"), CandidateFile("virus.exe", "application/octet-stream", b"x" * 500), _pdf("tiny.pdf", 5)],
        accepted=[],
    )

    assert [a.name for a in report.added] == ["ok.pdf"]
    assert [r.filename for r in report.rejections] == ["virus.exe", "tiny.pdf"]
    assert report.error_message == (
        "virus.exe: Extension not allowed. Only PDF, JPG, JPEG, PNG.\n"
        "tiny.pdf: File is too small or empty."
    )


def test_remove_at():
    vetter = AttachmentVetter()
    attachments = vetter.vet([_pdf("a.pdf"), _pdf("b.pdf"), _pdf("c.pdf")], accepted=[]).attachments

    assert [a.name for a in remove_at(attachments, 1)] == ["a.pdf", "c.pdf"]
    assert remove_at(attachments, 3) == attachments
    assert remove_at(attachments, -1) == attachments


def test_file_extension():
    assert file_extension("photo.JPEG") == "jpeg"
    assert file_extension("archive.tar.pdf") == "pdf"
    assert file_extension("README") == ""


def test_six_files_with_none_accepted_is_rejected():
    report = AttachmentVetter().vet([_pdf(f"doc{i}.pdf") for i in range(6)], accepted=[])
    assert report.limit_exceeded
    assert report.attachments == ()


def test_size_examples():
    vetter = AttachmentVetter()
    almost = CandidateFile("plan.pdf", "application/pdf", declared_size=int(4.9 * 1024 * 1024))
    assert vetter.check(almost).byte_size == int(4.9 * 1024 * 1024)

    over = CandidateFile("plan.pdf", "application/pdf", declared_size=int(5.1 * 1024 * 1024))
    assert _rejection_reason(over) == TOO_LARGE
    assert _rejection_reason(_pdf(size=50)) == TOO_SMALL
