"""Typed client layer over the GitHub REST API."""

from grm.github.client import GitHubClient
from grm.github.http import HttpClient, HttpError, MockHttpClient, UrllibHttpClient

__all__ = ["GitHubClient", "HttpClient", "HttpError", "MockHttpClient", "UrllibHttpClient"]
