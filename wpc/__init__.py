"""wpclone: WordPress installation cloning engine"""
__version__ = '1.0.0'
