from .upload import UploadReference, PipelineResult, BatchResult

__all__ = ['UploadReference', 'PipelineResult', 'BatchResult']
