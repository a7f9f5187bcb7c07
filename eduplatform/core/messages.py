"""Client-facing messages returned under the ``errors``/``result`` keys."""

CATEGORY_TITLE_MIN_LENGTH = 3
CATEGORY_TITLE_MAX_LENGTH = 50

# common
UNEXPECTED_ERROR = 'Unexpected error'
UNAUTHORIZED = 'Unauthorized'
FORBIDDEN = 'Forbidden: not enough permissions'
NO_SUCH_ROLE = 'No such role in the database'
UNABLE_TO_PARSE_ID = 'Unable to parse id, please add id parameter'
NUMERIC_PARAMETER = 'Parameter should be numeric'
STRING_PARAMETER = 'Parameter should be a string'
NOT_NULL_PARAMETER = 'Parameter should not be null'
ONLY_ALPHABET_ALLOWED = 'Only RU/EN alphabet symbols allowed, please change your request'
REMOVE_SUCCESS = 'Success: record was removed.'

# auth
NO_AUTH_NEEDED = 'No authentication needed'
AUTH_PASSED = 'Authentication passed!'
EXPIRED_TOKEN = 'Token is expired'

# login
USER_EXISTS = 'User with such credentials already exist'
UNABLE_TO_CREATE_USER = 'Unable to create user: '
WRONG_CREDENTIALS = 'Unable to authenticate user, wrong credentials'

# user
NO_USER = 'Unable to find user record'
NO_TEACHER = 'Unable to find teacher record'
NO_TEACHER_ROLE = 'Unable to find teacher role'
UNABLE_TO_UPDATE_USER = 'Unable to update user: '
USER_UNIQUE_FIELDS = 'login and email fields should be unique'
UNABLE_TO_REMOVE_TEACHER = 'Unable to remove teacher record: '

# category
NO_CATEGORY = 'Unable to find category record(s)'
UNABLE_CREATE_CATEGORY = 'Unable to create category: '
UNABLE_CHANGE_CATEGORY = 'Unable to change category: '
UNABLE_REMOVE_CATEGORY = 'Unable to remove category: '
WRONG_MIN_CATEGORY_LENGTH = f'Minimum category length is: {CATEGORY_TITLE_MIN_LENGTH}'
WRONG_MAX_CATEGORY_LENGTH = f'Maximum category length is: {CATEGORY_TITLE_MAX_LENGTH}'
TITLE_UNIQUE = 'title should be unique'

# course
NO_COURSE = 'Unable to find course record(s)'
UNABLE_CREATE_COURSE = 'Unable to create course: '
UNABLE_CHANGE_COURSE = 'Unable to change course: '
UNABLE_REMOVE_COURSE = 'Unable to remove course: '
ALREADY_ENROLLED = 'User is already enrolled to the course'
NOT_ENROLLED = 'User is not enrolled to the course'
ENROLL_SUCCESS = 'Success: user was enrolled to the course.'
LEAVE_SUCCESS = 'Success: user left the course.'
UNABLE_ENROLL = 'Unable to enroll user to the course: '
UNABLE_LEAVE = 'Unable to leave the course: '

# material
NO_MATERIAL = 'Unable to find material record(s)'
NOT_COURSE_TEACHER = 'Only the course teacher is allowed to manage its materials'
NO_COURSE_ACCESS = 'Only the course teacher or enrolled students can read its materials'
UNABLE_CREATE_MATERIAL = 'Unable to create material: '
UNABLE_CHANGE_MATERIAL = 'Unable to change material: '
UNABLE_REMOVE_MATERIAL = 'Unable to remove material: '


def required_fields(fields: str) -> str:
    return 'Please send required fields: ' + fields


def wrong_role(roles: str) -> str:
    return f'Wrong role, please send the right role: {roles}'
