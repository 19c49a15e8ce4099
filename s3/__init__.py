#!/usr/bin/env python3
"""
Seed file upload and bucket emptying.
"""
