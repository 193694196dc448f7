"""Unit tests for chunked batchUpdate submission."""

from unittest.mock import MagicMock

import pytest

from gdocs.managers import BatchOperationManager


def _requests(count: int) -> list[dict]:
    return [{"deleteContentRange": {"range": {"startIndex": i + 1, "endIndex": i + 2}}} for i in range(count)]


class TestChunking:
    def test_chunk_sizes(self):
        chunks = BatchOperationManager.chunk(_requests(7), 3)
        assert [len(c) for c in chunks] == [3, 3, 1]

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            BatchOperationManager(MagicMock(), chunk_size=0)


class TestExecuteInChunks:
    """Tests for sequential submission."""

    @pytest.mark.asyncio
    async def test_calls_in_order(self, mock_docs_service):
        requests = _requests(1000)
        manager = BatchOperationManager(mock_docs_service, chunk_size=450)

        result = await manager.execute_in_chunks(document_id="doc123", requests=requests)

        batch_update = mock_docs_service.documents.return_value.batchUpdate
        assert batch_update.call_count == 3
        sent = [call.kwargs["body"]["requests"] for call in batch_update.call_args_list]
        assert [len(c) for c in sent] == [450, 450, 100]
        assert [r for chunk in sent for r in chunk] == requests
        assert all(call.kwargs["documentId"] == "doc123" for call in batch_update.call_args_list)
        assert result.chunks == 3
        assert result.request_count == 1000

    @pytest.mark.asyncio
    async def test_no_requests_no_calls(self, mock_docs_service):
        manager = BatchOperationManager(mock_docs_service, chunk_size=450)
        result = await manager.execute_in_chunks(document_id="doc123", requests=[])
        assert result.chunks == 0
        mock_docs_service.documents.return_value.batchUpdate.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_stops_submission(self, mock_docs_service):
        execute = mock_docs_service.documents.return_value.batchUpdate.return_value.execute
        execute.side_effect = [{"replies": []}, RuntimeError("boom"), {"replies": []}]
        manager = BatchOperationManager(mock_docs_service, chunk_size=2)

        with pytest.raises(RuntimeError, match="boom"):
            await manager.execute_in_chunks(document_id="doc123", requests=_requests(6))

        assert execute.call_count == 2
