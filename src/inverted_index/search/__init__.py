"""
Indexing and query engine package.

- analyzers: Word splitting and term normalization
- models: Posting, Document and Index value types
- indexer: Builds an Index from a document mapping
- storage: Registry of built indexes keyed by source
- query: Query term flattening and lookup
"""
