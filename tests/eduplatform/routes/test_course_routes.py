import pytest

from eduplatform.core import messages
from eduplatform.models.course import Course
from eduplatform.models.material import Material
from eduplatform.repositories.categories import CategoryRepository
from eduplatform.repositories.courses import CourseRepository


@pytest.fixture
def category(db):
    return CategoryRepository(db).insert('Mathematics')


@pytest.fixture
def course(db, category, teacher):
    return CourseRepository(db).insert(
        title='Linear Algebra',
        description='Vectors and matrices',
        category_id=category.id,
        teacher_id=teacher.id,
    )


def test_create_course_as_admin(client, admin, teacher, category, auth_headers) -> None:
    response = client.post(
        '/api/v1/courses',
        json={'title': 'Calculus', 'description': 'Limits', 'categoryId': category.id, 'teacherId': teacher.id},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    body = response.json()
    assert body['title'] == 'Calculus'
    assert body['categoryId'] == category.id
    assert body['teacherId'] == teacher.id


def test_create_course_rejects_unknown_category(client, admin, teacher, auth_headers) -> None:
    response = client.post(
        '/api/v1/courses',
        json={'title': 'Calculus', 'categoryId': 999, 'teacherId': teacher.id},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json()['errors'] == messages.NO_CATEGORY


def test_create_course_rejects_non_teacher(client, admin, student, category, auth_headers) -> None:
    response = client.post(
        '/api/v1/courses',
        json={'title': 'Calculus', 'categoryId': category.id, 'teacherId': student.id},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json()['errors'] == messages.NO_TEACHER


def test_create_course_rejects_duplicate_title(client, admin, teacher, category, course, auth_headers) -> None:
    response = client.post(
        '/api/v1/courses',
        json={'title': course.title, 'categoryId': category.id, 'teacherId': teacher.id},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()['errors'] == messages.TITLE_UNIQUE


def test_create_course_is_forbidden_for_teachers(client, teacher, category, auth_headers) -> None:
    response = client.post(
        '/api/v1/courses',
        json={'title': 'Calculus', 'categoryId': category.id, 'teacherId': teacher.id},
        headers=auth_headers(teacher),
    )

    assert response.status_code == 403


def test_get_course_returns_not_found(client, student, auth_headers) -> None:
    response = client.get('/api/v1/courses/999', headers=auth_headers(student))

    assert response.status_code == 404
    assert response.json()['errors'] == messages.NO_COURSE


def test_list_courses(client, student, course, auth_headers) -> None:
    response = client.get('/api/v1/courses', headers=auth_headers(student))

    assert response.status_code == 200
    assert [item['id'] for item in response.json()] == [course.id]


def test_update_course_applies_partial_change(client, admin, course, auth_headers) -> None:
    response = client.put(
        '/api/v1/courses',
        json={'id': course.id, 'description': 'Updated'},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()['description'] == 'Updated'
    assert response.json()['title'] == 'Linear Algebra'


def test_update_course_rejects_null_title(client, db, admin, course, auth_headers) -> None:
    response = client.put(
        '/api/v1/courses',
        json={'id': course.id, 'title': None},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    error = response.json()['errors'][0]
    assert error['msg'] == messages.NOT_NULL_PARAMETER
    assert error['param'] == 'title'
    assert error['location'] == 'body'
    db.expire_all()
    assert db.get(Course, course.id).title == 'Linear Algebra'


def test_update_course_returns_not_found(client, admin, auth_headers) -> None:
    response = client.put('/api/v1/courses', json={'id': 999, 'title': 'Other'}, headers=auth_headers(admin))

    assert response.status_code == 404


def test_delete_course_removes_materials_and_is_idempotent(client, db, admin, course, auth_headers) -> None:
    db.add(Material(course_id=course.id, title='Lecture one', content='...'))
    db.commit()
    course_id = course.id
    headers = auth_headers(admin)

    first = client.delete(f'/api/v1/courses/{course_id}', headers=headers)
    second = client.delete(f'/api/v1/courses/{course_id}', headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json() == {'result': messages.REMOVE_SUCCESS}
    db.expire_all()
    assert db.query(Course).filter(Course.id == course_id).first() is None
    assert db.query(Material).filter(Material.course_id == course_id).count() == 0


def test_enroll_and_leave_course(client, db, student, course, auth_headers) -> None:
    headers = auth_headers(student)

    enrolled = client.post(f'/api/v1/courses/{course.id}/enroll', headers=headers)
    enrolled_again = client.post(f'/api/v1/courses/{course.id}/enroll', headers=headers)

    assert enrolled.status_code == 200
    assert enrolled.json() == {'result': messages.ENROLL_SUCCESS}
    assert enrolled_again.status_code == 400
    assert enrolled_again.json()['errors'] == messages.ALREADY_ENROLLED

    left = client.post(f'/api/v1/courses/{course.id}/leave', headers=headers)
    left_again = client.post(f'/api/v1/courses/{course.id}/leave', headers=headers)

    assert left.status_code == 200
    assert left.json() == {'result': messages.LEAVE_SUCCESS}
    assert left_again.status_code == 400
    assert left_again.json()['errors'] == messages.NOT_ENROLLED


def test_enroll_unknown_course(client, student, auth_headers) -> None:
    response = client.post('/api/v1/courses/999/enroll', headers=auth_headers(student))

    assert response.status_code == 404


def test_enroll_is_for_students_only(client, teacher, course, auth_headers) -> None:
    response = client.post(f'/api/v1/courses/{course.id}/enroll', headers=auth_headers(teacher))

    assert response.status_code == 403
