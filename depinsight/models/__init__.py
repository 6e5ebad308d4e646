"""Data models for dependency trees and reports."""
