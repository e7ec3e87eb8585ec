"""
Mapping formats.

- rdf: Direct Mapping, RDF parsing/serialization and quality validation
- r2rml: R2RML-style mapping configurations, generation and materialization
"""
