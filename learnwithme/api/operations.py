"""GraphQL documents sent to the backend."""

# ==============================================================================
# Auth
# ==============================================================================

LOGIN_MUTATION = """
mutation Login($email: String!, $password: String!) {
  login(input: { email: $email, password: $password }) {
    access_token
    refresh_token
  }
}
"""

SIGNUP_MUTATION = """
mutation Signup($input: SignupInput!, $profileImage: Upload) {
  signup(input: $input, profileImage: $profileImage) {
    _id
    name
    email
    role
    profileImageUrl
    points
  }
}
"""

# ==============================================================================
# Courses
# ==============================================================================

# Teacher name is left out: the list resolver fails when it is requested.
GET_ALL_COURSES = """
query GetAllCourses {
  courses {
    _id
    title
    description
    certified
    category
    level
    price
    rating
    students
    courseImageUrl
    courseImageKey
    createdAt
    updatedAt
    courseVideos {
      _id
      key
      title
      description
      duration
    }
    courseDocuments {
      title
      description
    }
    teacher {
      _id
    }
  }
}
"""

GET_COURSE_DETAILS = """
query GetCourseDetails($id: String!) {
  course(id: $id) {
    _id
    title
    description
    category
    level
    price
    rating
    students
    courseImageUrl
    courseImageKey
    createdAt
    updatedAt
    courseVideos {
      _id
      key
      title
      description
      url
      duration
      order
    }
    courseDocuments {
      _id
      key
      title
      description
      url
      order
    }
    teacher {
      _id
      name
      profileImageUrl
    }
  }
}
"""

GET_TEACHER_COURSES = """
query GetTeacherCourses($teacherId: String!) {
  coursesByTeacher(teacherId: $teacherId) {
    _id
    title
    description
    courseImageUrl
    courseImageKey
    category
    price
    rating
    students
  }
}
"""

CREATE_COURSE = """
mutation CreateCourse($input: CreateCourseInput!, $file: Upload) {
  createCourse(input: $input, file: $file) {
    _id
    title
    description
    category
    price
    courseImageUrl
    courseImageKey
  }
}
"""

UPDATE_COURSE = """
mutation UpdateCourse($id: String!, $input: UpdateCourseInput!) {
  updateCourse(id: $id, input: $input) {
    _id
    title
    description
    category
    price
    courseImageUrl
    courseImageKey
  }
}
"""

# ==============================================================================
# Enrollment and progress
# ==============================================================================

_COURSE_PROGRESS_FIELDS = """
    _id
    userId
    courseId
    completed
    completedAt
    videosProgress {
      videoId
      watchedSeconds
      completed
    }
    createdAt
    updatedAt
"""

IS_ENROLLED = """
query IsEnrolled($courseId: String!) {
  isEnrolledInCourse(courseId: $courseId)
}
"""

ENROLL_IN_COURSE = f"""
mutation EnrollInCourse($input: CreateCourseProgressInput!) {{
  createCourseProgress(input: $input) {{{_COURSE_PROGRESS_FIELDS}  }}
}}
"""

GET_COURSE_PROGRESS = f"""
query GetUserCourseProgress($courseId: String!) {{
  getUserCourseProgress(courseId: $courseId) {{{_COURSE_PROGRESS_FIELDS}  }}
}}
"""

UPDATE_VIDEO_PROGRESS = """
mutation UpdateVideoProgress($input: UpdateVideoProgressInput!) {
  updateVideoProgress(input: $input) {
    videoId
    watchedSeconds
    completed
  }
}
"""

MARK_COURSE_COMPLETED = f"""
mutation MarkCourseAsCompleted($courseId: String!) {{
  markCourseAsCompleted(courseId: $courseId) {{{_COURSE_PROGRESS_FIELDS}  }}
}}
"""
