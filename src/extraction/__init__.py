"""
Profile extraction tiers and their supporting pieces.

Modules:
- pipeline: ExtractionPipeline, heuristics -> LLM -> placeholder names, with caching
- heuristics / llm_extractor: the individual tiers
- company_validator: company-name filter shared by both tiers
- store: profile cache keyed by canonical URL
- export / scoring: CSV and JSON output, relevance ranking
"""
