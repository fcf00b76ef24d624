from fastapi import HTTPException, status
from typing import Any, Dict, Optional

class NotFoundException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_404_NOT_FOUND
        self.detail = detail or "Not found"

class NodeNotFoundException(NotFoundException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "Node not found", headers)

class QuestionNotFoundException(NotFoundException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "Question not found", headers)

class UserNotFoundException(NotFoundException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "User not found", headers)

class CourseNotFoundException(NotFoundException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "Course not found", headers)

class ForbiddenException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_403_FORBIDDEN
        self.detail = detail or "Forbidden"

class PermissionDeniedException(ForbiddenException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "Permission denied", headers)

class BadRequestException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_400_BAD_REQUEST
        self.detail = detail or "Bad request"

class IllegalUserTypeException(BadRequestException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "Illegal user type", headers)

class UnauthorizedException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_401_UNAUTHORIZED
        self.detail = detail or "Unauthorized"

class ConflictException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_409_CONFLICT
        self.detail = detail or "Conflict"
