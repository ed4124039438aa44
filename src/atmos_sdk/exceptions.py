"""
Exception classes for Atmos Python SDK
"""

from typing import Optional, Dict, Any


class AtmosSDKError(Exception):
    """Base exception for all Atmos SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class CredentialError(AtmosSDKError):
    """Exception raised when the uid or shared secret cannot be obtained"""
    pass


class KeyMaterialError(AtmosSDKError):
    """Exception raised for malformed PEM keys or certificates"""
    pass


class DocumentParseError(AtmosSDKError):
    """Exception raised when a JSON document cannot be decoded"""
    pass


class ServerCommunicationError(AtmosSDKError):
    """Exception raised for server communication errors"""
    
    def __init__(self, message: str, error_code: str = "SERVER_ERROR", 
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
