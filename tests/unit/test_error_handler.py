"""Unit tests for error handler"""
import pytest

from src.services.error_handler import (
    ApplicationError,
    DatabaseError,
    DeepDiveRequestError,
    ErrorCode,
    ErrorResponse,
    LLMAPIError,
    LLMGenerationError,
    RecordNotFoundError,
    ResearchAPIError,
    ScrapeAPIError,
    handle_error,
)


def test_error_response_creation():
    """ErrorResponse の作成テスト"""
    error = ErrorResponse(
        code=ErrorCode.INTERNAL_ERROR,
        message="Test error",
        details={"key": "value"},
    )

    assert error.code == ErrorCode.INTERNAL_ERROR
    assert error.message == "Test error"
    assert error.details == {"key": "value"}


def test_application_error():
    """ApplicationError のテスト"""
    error = ApplicationError(
        code=ErrorCode.VALIDATION_ERROR,
        message="Validation failed",
        details={"field": "test"},
    )

    assert error.code == ErrorCode.VALIDATION_ERROR
    assert error.message == "Validation failed"
    assert str(error) == "Validation failed"

    response = error.to_response()
    assert isinstance(response, ErrorResponse)
    assert response.code == ErrorCode.VALIDATION_ERROR
    assert response.details == {"field": "test"}


def test_deep_dive_request_error_defaults_to_validation_error():
    """DeepDiveRequestError のデフォルトコード"""
    error = DeepDiveRequestError("Missing required fields: idea, profile, or section")

    assert error.code == ErrorCode.VALIDATION_ERROR
    assert error.details == {}


def test_deep_dive_request_error_invalid_section():
    error = DeepDiveRequestError(
        "Invalid section: pricing", code=ErrorCode.INVALID_SECTION, details={"section": "pricing"}
    )

    assert error.code == ErrorCode.INVALID_SECTION
    assert error.details["section"] == "pricing"


@pytest.mark.parametrize(
    "error_class,code",
    [
        (ResearchAPIError, ErrorCode.RESEARCH_API_ERROR),
        (ScrapeAPIError, ErrorCode.SCRAPE_API_ERROR),
        (LLMAPIError, ErrorCode.LLM_API_ERROR),
        (LLMGenerationError, ErrorCode.LLM_GENERATION_ERROR),
        (DatabaseError, ErrorCode.DATABASE_ERROR),
        (RecordNotFoundError, ErrorCode.RECORD_NOT_FOUND),
    ],
)
def test_provider_error_codes(error_class, code):
    """各サブクラスのエラーコード"""
    error = error_class("failed", details={"status": 500})

    assert error.code == code
    assert error.message == "failed"
    assert error.details["status"] == 500


def test_original_error_is_kept():
    original = TimeoutError("slow")
    error = ResearchAPIError("timed out", original_error=original)

    assert error.original_error is original


def test_handle_error_with_application_error():
    """handle_error で ApplicationError を処理"""
    response = handle_error(ScrapeAPIError("Test error"), {"path": "/api/v1/deep-dive"})

    assert isinstance(response, ErrorResponse)
    assert response.code == ErrorCode.SCRAPE_API_ERROR


def test_handle_error_with_generic_exception():
    """handle_error で一般的な Exception を処理"""
    response = handle_error(ValueError("Generic error"))

    assert isinstance(response, ErrorResponse)
    assert response.code == ErrorCode.INTERNAL_ERROR
    assert response.message == "An unexpected error occurred"
    assert response.details == {"original_error": "Generic error"}
