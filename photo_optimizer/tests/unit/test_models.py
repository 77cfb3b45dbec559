"""
Unit tests for upload and result models
"""
import pytest

from photo_optimizer.models.upload import UploadReference, PipelineResult, BatchResult


class TestUploadReference:

    def test_from_upload_id(self):
        reference = UploadReference.from_upload_id('1697000000000abc')
        assert reference.key == 'raw/1697000000000abc.jpg'
        assert reference.basename == '1697000000000abc.jpg'

    def test_from_upload_id_rejects_empty(self):
        with pytest.raises(ValueError):
            UploadReference.from_upload_id('')

    @pytest.mark.parametrize('upload_id', ['../photo/abc', 'nested/abc', '..\\photo\\abc'])
    def test_from_upload_id_rejects_path_separators(self, upload_id):
        with pytest.raises(ValueError, match='path separators'):
            UploadReference.from_upload_id(upload_id)

    def test_from_key(self):
        reference = UploadReference.from_key('raw/xyz.jpg')
        assert reference.upload_id == 'xyz'
        assert reference.key == 'raw/xyz.jpg'

    def test_from_key_keeps_store_assigned_names(self):
        reference = UploadReference.from_key('raw/nested/my photo.jpeg')
        assert reference.key == 'raw/nested/my photo.jpeg'
        assert reference.basename == 'my photo.jpeg'

    @pytest.mark.parametrize('key', [
        'photo/abc.jpg', 'abc.jpg', 'raw/', 'raw/sub/', 'raw/nested/dir/', 'raw/notes.txt'
    ])
    def test_from_key_rejects_foreign_keys(self, key):
        with pytest.raises(ValueError, match='Not a raw upload key'):
            UploadReference.from_key(key)


class TestResults:

    def test_size_reduction(self):
        result = PipelineResult('raw/a.jpg', 'photo/d.jpg', 'd', False, 1000, 250)
        assert result.size_reduction == '75.0% (from 1000 to 250 bytes)'
        assert result.to_dict()['size_reduction'] == result.size_reduction

    def test_duplicate_has_no_size_reduction(self):
        result = PipelineResult('raw/a.jpg', 'photo/d.jpg', 'd', True, 1000)
        assert result.size_reduction is None

    def test_batch_summary(self):
        batch = BatchResult(results=[
            PipelineResult('raw/a.jpg', 'photo/d1.jpg', 'd1', False, 10, 5),
            PipelineResult('raw/b.jpg', 'photo/d1.jpg', 'd1', True, 10),
        ], invalidation_id='I1')

        summary = batch.to_dict()
        assert summary['processed_count'] == 2
        assert summary['duplicate_count'] == 1
        assert summary['publish_keys'] == ['photo/d1.jpg', 'photo/d1.jpg']
        assert summary['invalidation_id'] == 'I1'
