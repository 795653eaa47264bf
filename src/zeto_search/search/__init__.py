"""
Retrieval core.

This package provides the pure-Python search stack:
- analyzers: Tokenizer pipeline (case folding, length bounds, stemming)
- fuzzy: Edit distance and the similarity model
- models / inverted_index: Postings and the field:token inverted index
- stats: TF-IDF and BM25 scoring
- indexer: Document indexing and index maintenance
- query_engine: Query scoring, filtering, sorting and pagination
- suggest: Vocabulary auto-completion
"""
