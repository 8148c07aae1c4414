#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Configuration, error codes, .NET loading and point helpers."""
