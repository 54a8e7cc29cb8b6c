"""Cleanup campaign: target enumeration and step sequencing."""

from syscleaner.campaign.orchestrator import CampaignOrchestrator, CampaignReport

__all__ = ["CampaignOrchestrator", "CampaignReport"]
