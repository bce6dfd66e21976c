"""FTP operations module for the FTP transfer helpers.

This module handles all FTP-related functionality:
- FTPTransfer: Buffered file transfers and directory walks
- FtplibFileSystem: RemoteFileSystem over an ftplib session
- FTPConnectionManager: Connection management with state tracking
- Exceptions: FTP-specific error types
"""
