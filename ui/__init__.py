"""
UI Module - User interfaces for Rule Chatbot
"""
