"""AWS-backed agents for a multi-agent orchestrator.

This package contains the Lex, Bedrock Flows and Bedrock inline agents, the
payload codec layer they share, chat persistence and the HTTP surface.
"""
