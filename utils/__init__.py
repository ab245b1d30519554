"""utils: 유틸리티 함수들을 모아놓은 패키지.

Modules:
    password: 비밀번호 해싱 및 검증
    jwt_utils: Access Token 발급 및 검증
    storage: 업로드 디렉토리 파일 저장소
    file_validators: 첨부 파일 검증
    formatters: 날짜/시간 포맷팅
    exceptions: API 에러 타입 및 헬퍼
"""
