"""Parser adapters implementing FeatureParserPort."""

from featurelink.adapters.parsing.gherkin import GherkinParser

__all__ = ["GherkinParser"]
