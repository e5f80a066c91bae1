"""Reference kernels used to cross-check the chunked arithmetic."""
